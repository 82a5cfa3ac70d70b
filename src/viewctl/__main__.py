from viewctl.cli import main

main()
