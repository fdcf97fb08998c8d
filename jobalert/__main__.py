from jobalert.cli import main

main()
