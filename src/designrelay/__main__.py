from designrelay.ui.cli import run

run()
