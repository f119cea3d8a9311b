from zix_installer.main import cli

cli()
