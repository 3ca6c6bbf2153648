from dockrel.cli.app import main

main()
