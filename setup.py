"""
icalx: tolerant iCalendar parsing and recurrence expansion

Description
-----------

Parses iCalendar files as produced by mail servers, calendar services and
legacy desktop suites into Python data structures. Resolves Windows and
Outlook timezone labels to IANA zones, and expands recurring events with
their EXDATE exclusions and RECURRENCE-ID overrides.

Requirements
------------

Requires python 3.8 or later, dateutil 2.7.0 or later and pytz.

Recent changes
--------------
    - Chunked and asynchronous parsing
    - German rule descriptions
"""

from setuptools import setup, find_packages

doclines = (__doc__ or '').splitlines()

setup(name = "icalx",
      license = "Apache",
      zip_safe = True,
      entry_points = {
            'console_scripts': [
                  'icalx = icalx.cli:main',
            ]
      },
      include_package_data = True,
      python_requires = ">=3.8",
      install_requires=["python-dateutil >= 2.7.0", "pytz"],
      extras_require = {"test": ["pytest"]},
      platforms = ["any"],
      packages = find_packages(exclude=["tests", "tests.*"]),
      description = "A tolerant iCalendar parser with timezone resolution "
                    "and recurrence expansion",
      long_description = "\n".join(doclines[2:]),
      keywords = ['icalendar', 'ics', 'rrule', 'recurrence', 'timezone'],
      test_suite="tests",
      classifiers =  """
      Development Status :: 4 - Beta
      Environment :: Console
      Intended Audience :: Developers
      License :: OSI Approved :: Apache Software License
      Natural Language :: English
      Operating System :: OS Independent
      Programming Language :: Python
      Programming Language :: Python :: 3
      Topic :: Text Processing""".strip().splitlines()
      )
