from promptspeak.cli import main

main()
