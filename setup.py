"""Setup file for the package."""

from setuptools import setup, find_packages

setup(
    name="scshow-card-harvester",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "playwright>=1.40.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'card-harvester=card_harvester.main:main',
        ],
    },
    author="Your Name",
    description="Harvest the scshow calculator card catalog into a CSV table",
    python_requires='>=3.8',
)
