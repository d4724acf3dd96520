from lcovgate.cli import main

main()
