from songstore.cli import main

main()
