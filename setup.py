from setuptools import setup, find_packages

setup(
    name="fourline",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["run"],
    install_requires=[
        "numpy",
        "filelock",  # Locking for statistics snapshots
    ],
    extras_require={
        "test": ["pytest"],
    },
)
