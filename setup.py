"""
Setup configuration for the Interactive Finance Lessons computation core.

References:
    Abramowitz, M., & Stegun, I. A. (1964). Handbook of Mathematical
    Functions, formula 7.1.26.
    Black, F., & Scholes, M. (1973). The Pricing of Options and Corporate
    Liabilities. Journal of Political Economy, 81(3), 637-654.
    Kelly, J. L. (1956). A New Interpretation of Information Rate.
    Bell System Technical Journal, 35(4), 917-926.
    Acerbi, C., & Tasche, D. (2002). On the coherence of Expected Shortfall.
    Journal of Banking & Finance, 26(7), 1487-1503.
    Hurst, H. E. (1951). Long-term storage capacity of reservoirs.
    Transactions of the ASCE, 116, 770-799.
"""
from setuptools import setup, find_packages

setup(
    name="finance-lessons-core",
    version="1.0.0",
    description="Parameter, calculation, series-generation and registry core for interactive finance lessons",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=["numpy>=1.24.0", "scipy>=1.10.0", "pandas>=2.0.0"],
    extras_require={
        "dev": ["pytest>=7.4.0", "black", "flake8"],
    },
)
