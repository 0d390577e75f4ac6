from mews._cli import main

main()
