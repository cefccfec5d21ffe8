"""cubectl - run shell cubes and commands on a fleet of hosts over SSH."""

__version__ = "0.1.0"
