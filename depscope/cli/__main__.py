from depscope.cli import main

main()
