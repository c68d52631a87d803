## 4x4 homogeneous transformations for brepcore geometry
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

from math import cos, sin
import brepcore.geom as geom

## a matrix is represented as a list of four four-vectors, one per
## row.  Points are column vectors, so transforming a point p by
## matrix M is M.mul(p).  Curves and surfaces carry points and
## direction vectors; use transform_point() for the former and
## transform_vector() for the latter so translation only moves points.


class Matrix:
    """4x4 transformation matrix class for transforming homogeneous 3D coordinates"""

    def __init__(self,a=False):
        self.m = [[1,0,0,0],
                  [0,1,0,0],
                  [0,0,1,0],
                  [0,0,0,1]]

        if isinstance(a,Matrix):
            for i in range(4):
                self.setrow(i,list(a.getrow(i)))

        elif isinstance(a,(tuple,list)):
            if len(a) == 4 and all(isinstance(r,(tuple,list)) and len(r) == 4 for r in a):
                for i in range(4):
                    for j in range(4):
                        self.set(i,j,a[i][j])
            elif len(a)==16:
                for i in range(4):
                    for j in range(4):
                        self.set(i,j,a[i*4+j])
            else:
                raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
        elif a is not False:
            raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))

    def __repr__(self):
        return "Matrix({},{},{},{})".format(self.m[0],self.m[1],
                                            self.m[2],self.m[3])

    #return value indexed by i,j
    def get(self,i,j):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to get: {},{}'.format(i,j))
        return self.m[i][j]

    #set value indexed by i,j
    def set(self,i,j,x):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to set: {},{}'.format(i,j))
        if geom.isgoodnum(x):
            self.m[i][j]=x
        else:
            raise ValueError('bad value passed to set: {}'.format(x))

    def getrow(self,i):
        if i < 0 or i > 3:
            raise ValueError('bad row passed to getrow: {}'.format(i))
        return self.m[i]

    def getcol(self,j):
        if j < 0 or j > 3:
            raise ValueError('bad column passed to getcol: {}'.format(j))
        return [self.m[0][j],
                self.m[1][j],
                self.m[2][j],
                self.m[3][j]]

    def setrow(self,i,x):
        if not geom.isvect(x):
            raise ValueError('bad non-vector passed to setrow: {}'.format(x))
        if i < 0 or i > 3:
            raise ValueError('bad row index passed to setrow: {}'.format(i))
        self.m[i] = x

    # matrix multiply.  If x is a matrix, compute MX.  If X is a
    # vector, compute Mx.
    def mul(self,x):
        if isinstance(x,Matrix):
            result = Matrix()
            for i in range(4):
                for j in range(4):
                    result.set(i,j,_dot4(self.getrow(i),x.getcol(j)))
            return result
        elif geom.isvect(x):
            return [_dot4(self.getrow(i),x) for i in range(4)]

        raise ValueError('bad thing passed to mul(): {}'.format(x))


def _dot4(a,b):
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]+a[3]*b[3]


# return the generalized 4x4 arbitrary axis rotation matrix, angle in
# degrees
def Rotation(axis,angle,inverse=False):
    m = geom.mag(axis)
    if m < geom.EQ_THRESHOLD:
        raise ValueError('zero-length rotation axis not allowed')
    u = geom.scale3(axis,1.0/m)

    if inverse:
        angle *= -1.0
    rad = (angle%360.0)*geom.pi2/360.0

    ux = u[0]
    uy = u[1]
    uz = u[2]

    cang = cos(rad)
    cmin = 1.0-cang
    sang = sin(rad)

    # see http://www.opengl-tutorial.org/assets/faq_quaternions/index.html#Q38
    R = [[cang + ux*ux*cmin, ux*uy*cmin-uz*sang, ux*uz*cmin+uy*sang,0],
         [uy*ux*cmin+uz*sang, cang + uy*uy*cmin, uy*uz*cmin - ux*sang,0],
         [uz*ux*cmin-uy*sang, uz*uy*cmin+ux*sang, cang+uz*uz*cmin,0],
         [0,0,0,1]]

    return Matrix(R)

def Translation(delta,inverse=False):
    if inverse:
        delta = geom.scale3(delta,-1.0)
    T = [[1,0,0,delta[0]],
         [0,1,0,delta[1]],
         [0,0,1,delta[2]],
         [0,0,0,1]]
    return Matrix(T)

def Scale(x,y=False,z=False,inverse=False):
    if geom.isgoodnum(x):
        sx = x
        if geom.isgoodnum(y) and geom.isgoodnum(z):
            sy = y
            sz = z
        else:
            sy = sz = x
    elif geom.isvect(x):
        sx = x[0]
        sy = x[1]
        sz = x[2]
    else:
        raise ValueError('bad scaling values passed to Scale')

    if inverse:
        sx = 1.0/sx
        sy = 1.0/sy
        sz = 1.0/sz

    S = [[sx,0,0,0],
         [0,sy,0,0],
         [0,0,sz,0],
         [0,0,0,1.0]]
    return Matrix(S)


## applying matrices to geometry
## -----------------------------

def transform_point(m,p):
    """apply ``m`` to point ``p`` and project back to the w=1 plane"""
    r = m.mul([p[0],p[1],p[2],1.0])
    if abs(r[3]) < geom.EQ_THRESHOLD:
        raise ValueError('transform sends point {} to infinity'.format(geom.vstr(p)))
    return [r[0]/r[3],r[1]/r[3],r[2]/r[3],1.0]

def transform_vector(m,v):
    """apply the linear part of ``m`` to direction ``v``"""
    r = m.mul([v[0],v[1],v[2],0.0])
    return [r[0],r[1],r[2],1.0]

def uniform_scale(m):
    """If the linear part of ``m`` is a rotation (or reflection) times
    a uniform scale, return the scale factor; otherwise return None.
    Circles and spheres survive a transform only in the first case."""
    cols = [transform_vector(m,[1.0,0,0,1.0]),
            transform_vector(m,[0,1.0,0,1.0]),
            transform_vector(m,[0,0,1.0,1.0])]
    s = geom.mag(cols[0])
    if s < geom.EQ_THRESHOLD:
        return None
    for c in cols[1:]:
        if not geom.close(geom.mag(c),s):
            return None
    for i in range(3):
        for j in range(i+1,3):
            if not geom.close(geom.dot(cols[i],cols[j]),0.0):
                return None
    return s
