from safecalls.cli.main import main

main()
