from setuptools import setup, find_packages

setup(
    name="backsolve_engine",
    version="0.1.0",
    description="Cash flow spread / yield / IRR backsolve engine",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
        "pandas",
    ],
    extras_require={
        "test": [
            "pytest",
            "scipy",
        ],
    },
    python_requires=">=3.8",
)
