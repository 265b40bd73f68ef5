from losrs.cli import main

main()
