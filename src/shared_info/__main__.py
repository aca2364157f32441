from shared_info.cli import main

main()
