from lazyskills.cli import cli

cli()
