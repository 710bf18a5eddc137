from setuptools import setup, find_packages

setup(
    name="sand_cave",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "mesa>=3.0.0",
        "numpy>=1.24.0",
        "matplotlib>=3.7.0",
        "solara>=1.21.0",  # For the web interface
        "pandas>=2.0.0",  # For the batch runner
        "tqdm>=4.65.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "black>=22.0.0",
            "flake8>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "sand-cave=sand_cave.run:main",
        ],
    },
    python_requires=">=3.10",
    description="A Mesa-based simulation of sand filling a rock cave"
)
