# setup.py
from setuptools import setup, find_packages

setup(
    name="plotalgebra",
    version="0.1.0",
    description="Compositional algebra of statistical plot specifications",
    author="Randy Davila",
    author_email="rrd6@rice.edu",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pandas>=2.0",
        "numpy>=1.24",
        "scipy>=1.10",
        "matplotlib>=3.7",
        "rich>=13.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["plotalgebra=plotalgebra.cli:main"],
    },
    python_requires=">=3.9",
    include_package_data=True,
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
