from setuptools import find_packages, setup

setup(
    name="company-importer",
    version="0.1.0",
    packages=find_packages(include=["company_importer", "company_importer.*"]),
    python_requires=">=3.10",
    install_requires=[
        "click",
        "numpy",
        "openai",
        "pandas",
        "pycountry",
        "python-dotenv",
        "sqlalchemy>=1.4",
        "tld"
    ],
    extras_require={"dev": ["pytest"]},
    entry_points={
        "console_scripts": ["company-importer=company_importer.cli.main:cli"]
    },
)
