from fingers.cli import main

main()
