from commutecheck.cli import main

main()
