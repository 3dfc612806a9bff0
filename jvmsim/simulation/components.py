"""
Catalogue of the runtime subsystems shown by the visualizer.
"""

from typing import Dict
from enum import Enum
from dataclasses import dataclass


class JVMPart(Enum):
    """Named subsystems that can be activated, flashed or selected"""
    CLASS_LOADER = "CLASS_LOADER"
    METHOD_AREA = "METHOD_AREA"
    HEAP = "HEAP"
    HEAP_YOUNG = "HEAP_YOUNG"
    HEAP_OLD = "HEAP_OLD"
    STACK = "STACK"
    PC_REGISTER = "PC_REGISTER"
    NATIVE_STACK = "NATIVE_STACK"
    EXECUTION_ENGINE = "EXECUTION_ENGINE"
    GC = "GC"


@dataclass(frozen=True)
class ComponentInfo:
    part: JVMPart
    name: str
    description: str
    details: str


JVM_COMPONENTS: Dict[JVMPart, ComponentInfo] = {
    JVMPart.CLASS_LOADER: ComponentInfo(
        JVMPart.CLASS_LOADER,
        "Class Loader",
        "Loads .class files into memory",
        "The class loader subsystem loads class files from the file system or the "
        "network, verifies them and allocates memory for class variables. It is made "
        "of the Bootstrap, Extension and Application class loaders.",
    ),
    JVMPart.METHOD_AREA: ComponentInfo(
        JVMPart.METHOD_AREA,
        "Method Area",
        "Stores class metadata, constants and static variables",
        "The method area (Metaspace since Java 8) holds loaded class information, "
        "constants, static variables and code produced by the JIT compiler.",
    ),
    JVMPart.HEAP: ComponentInfo(
        JVMPart.HEAP,
        "Heap",
        "Main storage area for Java objects",
        "The largest memory area managed by the JVM, shared by all threads. Nearly "
        "every object instance is allocated here. It is split into the young "
        "generation and the old generation.",
    ),
    JVMPart.HEAP_YOUNG: ComponentInfo(
        JVMPart.HEAP_YOUNG,
        "Young Gen",
        "Where new objects are born (Eden + Survivors)",
        "Contains Eden and two survivor spaces (S0, S1). Most objects are created in "
        "Eden. When Eden fills up a Minor GC is triggered.",
    ),
    JVMPart.HEAP_OLD: ComponentInfo(
        JVMPart.HEAP_OLD,
        "Old Gen",
        "Holds long-lived objects",
        "Objects that survive enough young collections are promoted here. When the "
        "old generation fills up a Major GC (Full GC) runs, which usually takes "
        "longer.",
    ),
    JVMPart.STACK: ComponentInfo(
        JVMPart.STACK,
        "VM Stack",
        "Thread-private, stores stack frames",
        "Every method invocation creates a stack frame holding the local variable "
        "table, operand stack, dynamic linking data and the return address.",
    ),
    JVMPart.PC_REGISTER: ComponentInfo(
        JVMPart.PC_REGISTER,
        "PC Register",
        "Bytecode address being executed by the current thread",
        "A small memory area recording the address of the bytecode instruction the "
        "current thread is executing. It is undefined while a native method runs.",
    ),
    JVMPart.NATIVE_STACK: ComponentInfo(
        JVMPart.NATIVE_STACK,
        "Native Stack",
        "Serves native methods",
        "Works like the VM stack, except that the VM stack serves Java methods while "
        "the native method stack serves native methods.",
    ),
    JVMPart.EXECUTION_ENGINE: ComponentInfo(
        JVMPart.EXECUTION_ENGINE,
        "Execution Engine",
        "Interprets or compiles bytecode to machine code",
        "Contains the interpreter and the JIT compiler. The garbage collector is also "
        "part of the execution engine.",
    ),
    JVMPart.GC: ComponentInfo(
        JVMPart.GC,
        "Garbage Collector",
        "Reclaims objects that are no longer used",
        "Part of the execution engine, responsible for reclaiming unreachable objects "
        "on the heap. Common algorithms are mark-sweep, copying and mark-compact.",
    ),
}


def parse_part(value: str) -> JVMPart:
    """Look up a part by enum name, case-insensitively ('heap_old', 'GC', ...)"""
    key = value.strip().upper().replace('-', '_')
    try:
        return JVMPart[key]
    except KeyError:
        raise ValueError(f"Unknown component: {value!r}") from None
