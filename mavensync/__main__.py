from mavensync.cli import main

main()
