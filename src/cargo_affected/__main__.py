from cargo_affected.cli.app import main

main()
