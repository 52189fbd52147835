import os, re
from setuptools import setup, find_packages

PACKAGE = "pattern_catalog"


def read_file(filepath: str) -> str:
    """Read and return the content of a file."""
    with open(filepath, "r", encoding="utf-8") as f:
        return f.read().strip()


def get_long_description() -> str:
    """Return the README, or an empty string when it is missing."""
    return read_file("README.md") if os.path.exists("README.md") else ""


def get_dependencies() -> list:
    """Retrieve dependencies from the requirements file."""
    depfile = "requirements.txt"
    if os.path.exists(depfile):
        return [
            line.strip() for line in read_file(depfile).splitlines()
            if line.strip() and not line.startswith("#")
        ]
    return []


def get_version() -> str:
    """Assemble the package version from the components in the version file."""
    versionfile = os.path.join(PACKAGE, "_version.py")
    if not os.path.exists(versionfile):
        raise FileNotFoundError("Version file '_version.py' not found.")

    content = read_file(versionfile)
    parts = {}
    for name in ("MAJOR", "MINOR", "PATCH"):
        match = re.search(rf"^VERSION_{name} = (\d+)", content, re.M)
        if match is None:
            raise RuntimeError(f"Unable to find VERSION_{name} in '_version.py'.")
        parts[name] = match.group(1)
    suffix = re.search(r"^VERSION_SUFFIX = ['\"]([^'\"]*)['\"]", content, re.M)

    version = f"{parts['MAJOR']}.{parts['MINOR']}.{parts['PATCH']}"
    if suffix and suffix.group(1):
        version += f"-{suffix.group(1)}"
    return version


extras_require = {
    # Testing dependencies
    "test": [
        "pytest>=7.4.0",
        "pytest-cov>=4.1.0",
        "hypothesis>=6.88.0",  # Property-based testing
        "pytest-mock>=3.11.0",
    ],

    # Development dependencies
    "dev": [
        "pytest>=7.4.0",
        "pytest-cov>=4.1.0",
        "pytest-xdist>=3.3.0",
        "hypothesis>=6.88.0",
        "pytest-mock>=3.11.0",
        "black>=23.0.0",
        "flake8>=6.0.0",
    ],
}

# Add 'all' option to install every extra
extras_require["all"] = sorted({
    dep for deps in extras_require.values() for dep in deps
})

# Setup the package
if __name__ == '__main__':
    setup(
        name="pattern-catalog",
        version=get_version(),
        description="A catalogue of object-oriented design patterns, each a narrated sample program.",
        long_description=get_long_description(),
        long_description_content_type="text/markdown",
        license="MIT",
        packages=find_packages(exclude=["tests", "tests.*"]),
        install_requires=get_dependencies(),
        extras_require=extras_require,
        python_requires=">=3.9",
        classifiers=[
            "Development Status :: 4 - Beta",
            "Intended Audience :: Developers",
            "Intended Audience :: Education",
            "License :: OSI Approved :: MIT License",
            "Operating System :: OS Independent",
            "Programming Language :: Python :: 3",
            "Programming Language :: Python :: 3.9",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.12",
            "Topic :: Education",
            "Topic :: Software Development :: Libraries :: Python Modules",
        ],
        keywords="design patterns catalogue gof examples pydantic",
        entry_points={
            "console_scripts": [
                "pattern-catalog=pattern_catalog.__main__:main",
            ],
        },
    )
