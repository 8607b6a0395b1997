from setuptools import setup, find_packages

setup(
    name="cbarchiver",
    version="1.0.0",
    description="Pack folders of comic page scans into CB7/CBZ archives with 7z",
    author="Jacob",
    packages=find_packages(include=["cbarchiver", "cbarchiver.*"]),
    install_requires=[
        "pillow",
        "py7zr",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "cbarchiver=cbarchiver.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Archiving :: Compression",
    ],
    python_requires=">=3.9",
)
