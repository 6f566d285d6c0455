from setuptools import setup, find_packages
import os

install_requires = ["pydantic>=2", "lark", "structlog>=23.1"]

# Define optional dependencies for development
extras_require = {"dev": ["pytest"]}

setup(
    name="lvs-intellisense",
    version="0.3.0",
    python_requires=">=3.9",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "lvs = lvs.cli:main",
        ],
    },
    include_package_data=True,
    package_data={"lvs.expressions": ["*.lark"]},
    description="Scoped symbol registry and node-socket type resolver for the Luau visual scripting editor.",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
)
