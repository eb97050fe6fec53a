from helm_bos.cli.cli import main

main()
