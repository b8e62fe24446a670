# setup.py
from setuptools import setup, find_packages

setup(
    name="theta",
    version="0.1.0",
    description="Expression metaprogramming engine: quoting, substitution, quasiquotation and call standardization",
    packages=find_packages(include=["theta", "theta.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)
