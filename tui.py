#!/usr/bin/env python3
from ditheros.tui.app import run

if __name__ == "__main__":
    run()
