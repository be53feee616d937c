from lanmon.cli import lanmon

lanmon(prog_name="lanmon")
