from jitterbit.cli import main

main()
