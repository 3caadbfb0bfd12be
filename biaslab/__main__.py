"""Module entrypoint for `python -m biaslab`."""

from biaslab.cli.biaslab_cli import run

if __name__ == "__main__":
    run()
