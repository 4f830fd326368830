from spuria.cli import main

main()
