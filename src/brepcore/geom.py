## foundational vector and tolerance helpers for brepcore
## Copyright (c) 2025 brepcore contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""foundational vector and tolerance helpers for **brepcore**

====================
OVERVIEW
====================

Points and vectors in **brepcore** are homogeneous coordinate
4-lists of the form ``[x, y, z, 1.0]``.  Every operation in this
module works on the first three components and returns a fresh list
with ``w == 1.0``; nothing here mutates its arguments.

constants
=========

``EQ_THRESHOLD`` is the one tolerance used for every point, scalar
and containment comparison in the kernel.  The face splitter and the
loop remesher both decide "is this the same point" through
``vclose``, so they always agree.  ``pi2`` is 2*pi.
``RASTER_SEGMENTS`` is the number of samples per full turn used when
a circular edge has to be approximated by a polyline.

Redefine these at your peril.

"""

from math import sqrt, pi
from copy import deepcopy

EQ_THRESHOLD = 1e-8
pi2 = 2.0*pi
RASTER_SEGMENTS = 256


## utility function to determine if argument is a "real" python
## number, and not a boolean
def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n,bool)) and isinstance(n,(int,float))

## utilty function to determine if scalars a and b are the same to
## within EQ_THRESHOLD
def close(a,b):
    """ are two scalars the same within EQ_THRESHOLD
    """
    return abs(a-b) < EQ_THRESHOLD


## operations on vectors
## ------------------------

def vect(a=False,b=False,c=False,d=False):
    """Convenience function for making a homogeneous coordinates 4 vector
from practically anything
    """
    r = [0,0,0,1]
    if isgoodnum(a):
        r[0]=a
        if isgoodnum(b):
            r[1]=b
            if isgoodnum(c):
                r[2]=c
                if isgoodnum(d):
                    r[3]=d
    elif isinstance(a,(tuple,list)):
        for i in range(min(4,len(a))):
            x=a[i]
            if isgoodnum(x):
                r[i]=x
    return r

## check to see if argument is a proper vector for our purposes
def isvect(x):
    """
    check to see if argument is a proper vector for our purposes
    """
    return isinstance(x,list) and len(x) == 4 and isgoodnum(x[0]) and \
        isgoodnum(x[1]) and isgoodnum(x[2]) and isgoodnum(x[3])

def point(x=False,y=False,z=False):
    """Point creation from point, 3-tuple or scalars"""
    if ispoint(x):
        return deepcopy(x)
    if isinstance(x,(tuple,list)):
        return vect(list(x)[:3])
    return vect(x,y,z)

def ispoint(x):
    """ is it a point?"""
    return isvect(x) and x[3] > 0.0

def vclose(a,b):
    """ are two points the same within EQ_THRESHOLD"""
    return close(mag(sub(a,b)),0)

## R^3 -> R^3 functions: ignore w component
## ------------------------------------------------
def add(a,b):
    """ 3 vector, `a + b`"""
    return [a[0]+b[0],a[1]+b[1],a[2]+b[2],1.0]

def sub(a,b):
    """ 3 vector, `a - b`"""
    return [a[0]-b[0],a[1]-b[1],a[2]-b[2],1.0]

def scale3(a,c):
    """ 3 vector, vector ''a'' times scalar ``c``, `a * c`"""
    return [a[0]*c,a[1]*c,a[2]*c,1.0]

def negate(a):
    """ 3 vector, `-a`"""
    return [-a[0],-a[1],-a[2],1.0]

def cross(a,b):
    """Compute the cross generalized product of a x b, assuming that both
    fall into the w=1 hyperplane

    """
    return [ a[1]*b[2] - a[2]*b[1],
             a[2]*b[0] - a[0]*b[2],
             a[0]*b[1] - a[1]*b[0],
             1.0 ]

## R^3 -> R functions
## ------------------
def dot(a,b):
    """ 3 vector ``a`` dot ``b`` """
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]

def mag(a):
    """ compute the magnitude of 3 vector ``a``"""
    return sqrt(a[0]*a[0]+a[1]*a[1]+a[2]*a[2])

def dist(a,b):
    """ compute the euclidean distance between two 3 vector points ``a`` and ``b``"""
    return mag(sub(a,b))

def unit(a):
    """ return ``a`` scaled to unit length; zero vectors are an error"""
    m = mag(a)
    if m < EQ_THRESHOLD:
        raise ValueError('cannot normalize zero-length vector {}'.format(vstr(a)))
    return scale3(a,1.0/m)

def orthobasis(n):
    """Return two unit vectors ``(u, v)`` perpendicular to unit vector
    ``n`` such that ``cross(u, v) == n``.

    The helper axis is whichever of X or Y is least aligned with ``n``,
    so the basis for a given normal is always the same.
    """
    if abs(n[0]) < 0.9:
        helper = [1.0,0.0,0.0,1.0]
    else:
        helper = [0.0,1.0,0.0,1.0]
    u = unit(sub(helper,scale3(n,dot(helper,n))))
    v = cross(n,u)
    return u, v

## tolerant ordering
## -----------------

def lexless(a,b):
    """ is ``a`` lexicographically before ``b``, comparing x, then y,
    then z, treating coordinates within EQ_THRESHOLD as equal"""
    for i in range(3):
        if close(a[i],b[i]):
            continue
        return a[i] < b[i]
    return False

def lexmin(pts):
    """ return the lexicographically smallest point of ``pts``"""
    best = None
    for p in pts:
        if best is None or lexless(p,best):
            best = p
    return best

def dedupe(pts):
    """ return ``pts`` with points closer than EQ_THRESHOLD collapsed,
    keeping first-seen order"""
    result = []
    for p in pts:
        if not any(vclose(p,q) for q in result):
            result.append(p)
    return result

def vstr(a):
    """ format a point or list of points, dropping the w component
    and integral decimals"""
    def _fmt(x):
        if isinstance(x,float) and x.is_integer():
            return str(int(x))
        return str(round(x,9))
    if isvect(a):
        return '[' + ', '.join(_fmt(x) for x in a[:3]) + ']'
    if isinstance(a,(list,tuple)):
        return '[' + ', '.join(vstr(x) for x in a) + ']'
    return str(a)
