from ocdg.cli import main

main()
