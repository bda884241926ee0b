from termnotify.cli import main

main()
