from setuptools import setup, find_packages

setup(
    name="mercury_qa",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={
        "mercury_qa": ["resources/*.properties", "templates/*.j2"],
    },
    install_requires=[
        "playwright>=1.52.0",
        "pydantic>=2",
        "python-dotenv",
        "requests",
        "jinja2",
        "pytest",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "mercury-qa=mercury_qa.cli:main",
        ],
    },
    python_requires='>=3.10',
)
