from devhelper.cli import main

main()
