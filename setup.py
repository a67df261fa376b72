from setuptools import setup, find_packages

# Core dependencies
core_requirements = [
    "pillow>=9.3.0",
    "typing-extensions>=4.4.0",
    "cairosvg>=2.5.2"
]

# Test dependencies
test_requirements = [
    "pytest>=7.0.0"
]

setup(
    name="patchwork-shapes",
    version="0.1.0",
    description="2D vector shapes with a thread-safe composite, a text codec and raster/SVG rendering",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=core_requirements,
    extras_require={
        "test": test_requirements,
        "full": test_requirements
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
)
