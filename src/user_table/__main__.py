from user_table.cli.main import app

app(prog_name="user-table")
