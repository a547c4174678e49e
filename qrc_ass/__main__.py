from qrc_ass.cli import main

main()
