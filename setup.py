"""
Setup script for Command MCP Server.
"""
from setuptools import setup, find_packages

# Read requirements from requirements.txt
with open("requirements.txt") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="command-mcp",
    version="0.1.0",
    description="Model Context Protocol server for executing allow-listed host commands",
    long_description="A Model Context Protocol server that lets LLM clients run an application's named commands, gated by an allow-list, with optional delayed background execution.",
    author="Command MCP Team",
    packages=find_packages(),
    install_requires=requirements,
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "command-mcp=command_mcp.server:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
