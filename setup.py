from setuptools import setup, find_packages

setup(
    name="flowgraph",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src", exclude=["tests", "tests.*"]),
    install_requires=[
        "pydantic>=2",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    python_requires=">=3.9",
    # Add metadata for PyPI
    description="minimal async workflow orchestration: nodes, labeled transitions, retries and batches",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
