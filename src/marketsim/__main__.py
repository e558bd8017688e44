from marketsim.cli import main

main()
