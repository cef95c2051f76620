"""
# Chunkstash: hide things inside file formats made of chunks.

A chunk based file format is a sequence of self-describing records, each one
carrying its own length, a type code and an integrity check. The PNG format
is the canonical example and is the one implemented here: custom chunks can be
added to (and removed from) an existing image without disturbing the image
itself, so they are a nice place where to stash a message.

The format is described declaratively: a record is a subclass of Chunk listing
its fields in order, and two main operations are defined on it

 1. unpack(): read the binary data from a stream and build the high-level
    representation. The stream is a cursor checking the available bytes
    before each read, so short input is always reported as such.

 2. pack(): encode the high-level representation into binary data.

to these we add one more

 3. relayout(): recompute the fields that depend on other fields (lengths,
    checksums) so that a freshly built record packs consistently.

"""
