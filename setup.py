from setuptools import setup, find_packages

setup(
    name="pyskiplist",
    version="0.1.0",
    packages=find_packages(include=["pyskiplist", "pyskiplist.*"]),
    python_requires=">=3.11",
    install_requires=[],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "mypy>=1.0.0",
            "isort>=5.0.0",
        ],
        "bench": [
            "plotly>=5.13.0",
            "numpy>=1.23.0",
            "tqdm>=4.65.0",
            "sortedcontainers>=2.4.0",
        ],
    },
    author="thekeenest",
    author_email="your.email@example.com",
    description="Probabilistic ordered multi-map (skip list) in pure Python",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    url="https://github.com/thekeenest/pyskiplist",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.11",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
