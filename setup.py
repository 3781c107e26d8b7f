from setuptools import setup

setup(
    name="palmz",
    version="0.1.0",
    description="PalmDoc (PalmDOC/MOBI) compression codec",
    python_requires=">=3.8",
    py_modules=[
        "palmdoc",
        "match_finder",
        "record_codec",
        "palmz",
        "benchmark_records",
        "generate_ratio_charts",
    ],
    install_requires=["numpy", "tqdm", "matplotlib"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["palmz=palmz:main"]},
)
