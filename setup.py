from setuptools import setup, find_namespace_packages

setup(
    name="book_lending",
    version="0.1.0",
    packages=find_namespace_packages(include=['lending*', 'cli*', 'api*']),
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "Click",
        "SQLAlchemy>=2.0",
        "Pillow",
        "fastapi",
        "pydantic>=2",
        "python-dotenv",
    ],
    extras_require={
        "postgres": ["psycopg2-binary"],
        "test": ["pytest", "httpx"],
    },
    entry_points={
        "console_scripts": [
            "lending=cli.main:main",
        ],
    },
)
