import glob
from pathlib import Path
from setuptools import setup
import sys


if sys.version_info < (3, 6):
    raise RuntimeError("Python version is {}. Requires 3.6 or greater."
                       "".format(sys.version_info))


def read(fname):
    with open(Path(__file__).parent / fname) as f:
        result = f.read()
    return result


requirements = [r for r in read('requirements.txt').splitlines()
                if r and not r.startswith('#')]


setup(name='markup_diff',
      version='0.1.0',
      description='Structural and textual diffs of HTML and plain text',
      packages=['markup_diff'],
      scripts=glob.glob('scripts/*'),
      install_requires=requirements,
      extras_require={'test': ['pytest']},
      long_description=read('README.md'),
      python_requires='>=3.6',
     )
