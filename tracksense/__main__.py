from tracksense.cli import main

main()
