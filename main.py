#!/usr/bin/env python3
"""Tutum stack deploy tool — CLI entrypoint."""

from tutumdeploy.tutumdeploy import main

if __name__ == "__main__":
    main()
