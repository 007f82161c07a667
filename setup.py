from setuptools import setup, find_packages

setup(
    name="file-transcoder",
    version="0.1.0",
    description="Convert structured data between JSON, XML, CSV and delimited text",
    author="Your Name",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "xmltodict>=0.13",
        "pyjwt>=2.8",
        "pyyaml>=6.0",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "structlog>=23.1",
        "typer>=0.9",
        "rich>=13.0",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": ["pytest>=7.4"],
    },
    entry_points={
        "console_scripts": [
            "file-transcoder=file_transcoder.cli:app"
        ]
    },
    python_requires=">=3.10",
    include_package_data=True,
)
