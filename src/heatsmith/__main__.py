from heatsmith.cli.app import main

main()
