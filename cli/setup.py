from setuptools import setup

setup(
    name="expenses-cli",
    version="1.0.0",
    description="CLI for the Expenses API",
    py_modules=["main"],
    install_requires=[
        "click==8.1.7",
        "requests==2.32.5",
        "python-dotenv==1.0.0",
        "PyYAML==6.0.2",
        "rich==13.7.0",
    ],
    entry_points={
        "console_scripts": [
            "expenses-cli=main:cli",
        ],
    },
    python_requires=">=3.11",
)
