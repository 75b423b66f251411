from setuptools import setup, find_packages

with open("requirements.txt") as f:
    install_requires = f.read().strip().split("\n")

setup(
    name="mollie_erpnext",
    version="1.0.0",
    description="Mollie Payment Gateway for ERPNext",
    author="Cloudstek",
    author_email="info@cloudstek.nl",
    packages=find_packages(exclude=["tests", "tests.*"]),
    zip_safe=False,
    include_package_data=True,
    install_requires=install_requires,
    extras_require={
        "test": [
            "pytest",
            "frappe @ git+https://github.com/frappe/frappe.git@version-15",
        ],
    },
)
