from setuptools import setup, find_packages

setup(
    name="skybrief",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"skybrief": ["data/*.csv"]},
    install_requires=[
        "requests>=2.25.1",
        "pandas>=1.2.0",
        "python-dateutil>=2.8.1",
        "metar-taf-parser-mivek>=1.6.0",
        "fastapi>=0.100.0",
        "uvicorn>=0.23.0",
        "pydantic>=2.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "httpx>=0.24.0",
            "black>=21.0",
            "mypy>=0.900",
            "flake8>=3.9.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "skybrief=skybrief.cli:main",
        ],
    },
    author="Brice Rosenzweig",
    author_email="brice@rosenzweig.io",
    description="Aviation weather decoding, severity classification and route briefings",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    url="https://github.com/brice/skybrief",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
    python_requires=">=3.8",
)
