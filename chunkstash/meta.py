import logging
from enum import Enum, auto


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()
    NETWORK       = auto()
    NATIVE        = auto()


class FieldDescriptor(object):
    """Wrapper around field access of a Chunk related class.

    Accessing the attribute on the class returns the field itself, on an
    instance it returns the value of the field. Values are read-only:
    a record changes only by building a new one."""

    def __init__(self, field_instance: "Field", field_name: str):
        self.field = field_instance
        self.field.name = field_name

    def __get__(self, instance, type=None):
        if instance is None:
            return self.field

        return instance.get_value(self.field.name)

    def __set__(self, instance, value):
        raise AttributeError(f"field '{self.field.name}' of {instance.__class__.__name__} is read-only")


class FieldBase(object):

    def contribute_to_chunk(self, cls, name):
        if name in cls._meta.fields:
            raise AttributeError(f'field {name} is already present in class {cls.__name__}')

        cls._meta.fields.append(name)
        cls._meta.instances[name] = self
        setattr(cls, name, FieldDescriptor(self, name))


class Meta(object):
    """Class containing metadata about the abstraction"""

    def __init__(self):
        self.fields = []
        self.instances = {}


class MetaChunk(type):

    def __new__(cls, names, bases, attrs):
        '''Collect the fields in order of definition, the ones of the parents first.'''
        field_attrs = {name: obj for name, obj in attrs.items() if hasattr(obj, 'contribute_to_chunk')}
        new_attrs = {name: obj for name, obj in attrs.items() if name not in field_attrs}

        new_cls = super(MetaChunk, cls).__new__(cls, names, bases, new_attrs)

        new_cls._meta = Meta()
        new_cls.logger = logging.getLogger(new_cls.__module__)

        # handle inheritance
        parents = [_ for _ in bases if isinstance(_, MetaChunk)]
        for parent in parents:
            for obj_name in parent._meta.fields:
                new_cls._meta.fields.append(obj_name)
                new_cls._meta.instances[obj_name] = parent._meta.instances[obj_name]

        for obj_name, obj in field_attrs.items():
            new_cls.add_to_class(obj_name, obj)

        return new_cls

    def add_to_class(cls, name, value):
        cls.logger.debug('contribute_to_chunk() found for field \'%s\'' % name)
        value.contribute_to_chunk(cls, name)
