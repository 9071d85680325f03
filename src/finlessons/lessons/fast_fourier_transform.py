"""
Fast Fourier Transform: From Time to Frequency
==============================================

A two-tone signal with noise is sampled, optionally tapered by a window and
transformed on a bounded frequency grid. The grid stops at
min(50 Hz, Nyquist) so aliasing never shows up as a spurious peak.
"""

from typing import Any, Dict, Mapping

import pandas as pd

from ..config import CONFIG
from ..core.module import ChartContent, InteractiveContent, LessonModule, PhaseDescriptor
from ..core.parameters import Parameter, ParameterKind, ParameterValidation
from ..models.spectral import WINDOWS, bounded_dft, window_weights
from ..simulation.rng import SeededRandom
from ..simulation.signals import two_tone_signal

WINDOW_LABELS = {
    "none": "None (Rectangular)",
    "hanning": "Hanning Window",
    "hamming": "Hamming Window",
}

PARAMETERS = (
    Parameter(key="frequency1", label="First Frequency (Hz)", default=5,
              min=1, max=25, step=0.5, unit="Hz", formatter=lambda v: f"{v} Hz",
              category="Signal Components", importance="high",
              description="Frequency of the first sinusoidal component"),
    Parameter(key="frequency2", label="Second Frequency (Hz)", default=15,
              min=1, max=25, step=0.5, unit="Hz", formatter=lambda v: f"{v} Hz",
              category="Signal Components", importance="high",
              description="Frequency of the second sinusoidal component"),
    Parameter(key="amplitude1", label="First Amplitude", default=1.0,
              min=0, max=2, step=0.1,
              category="Signal Components", importance="medium",
              description="Amplitude of the first sinusoidal component"),
    Parameter(key="amplitude2", label="Second Amplitude", default=0.5,
              min=0, max=2, step=0.1,
              category="Signal Components", importance="medium",
              description="Amplitude of the second sinusoidal component"),
    Parameter(key="phase1", label="First Phase (radians)", default=0.0,
              min=0, max=6.28, step=0.1, unit="rad", formatter=lambda v: f"{v:.2f} rad",
              category="Signal Components", importance="low",
              description="Phase shift of the first sinusoidal component"),
    Parameter(key="phase2", label="Second Phase (radians)", default=0.0,
              min=0, max=6.28, step=0.1, unit="rad", formatter=lambda v: f"{v:.2f} rad",
              category="Signal Components", importance="low",
              description="Phase shift of the second sinusoidal component"),
    Parameter(key="sample_rate", label="Sample Rate (Hz)", default=100,
              min=50, max=200, step=10, unit="Hz", formatter=lambda v: f"{v} Hz",
              category="Sampling Parameters", importance="high",
              description="Number of samples per second"),
    Parameter(key="duration", label="Duration (seconds)", default=2.0,
              min=1, max=5, step=0.5, unit="s", formatter=lambda v: f"{v} s",
              category="Sampling Parameters", importance="medium",
              description="Length of the signal in time"),
    Parameter(key="noise_level", label="Noise Level", default=0.1,
              min=0, max=0.5, step=0.01, formatter=lambda v: f"{v * 100:.0f}%",
              category="Signal Processing", importance="medium",
              description="Amount of random noise added to the signal"),
    Parameter(key="window_function", label="Window Function", default="none",
              kind=ParameterKind.SELECT, options=WINDOWS,
              formatter=lambda v: WINDOW_LABELS.get(v, v),
              validation=ParameterValidation(type="string"),
              category="Signal Processing", importance="medium",
              description="Windowing function applied before the transform"),
)


def calculate(params: Mapping[str, Any]) -> Dict[str, Any]:
    sample_rate = params["sample_rate"]
    num_samples = int(sample_rate * params["duration"])
    nyquist = sample_rate / 2.0
    analysed = min(num_samples, CONFIG.spectral.max_samples)
    return {
        "num_samples": num_samples,
        "time_step": 1.0 / sample_rate,
        "frequency_resolution": sample_rate / num_samples,
        "nyquist_frequency": nyquist,
        "max_frequency": min(CONFIG.spectral.max_frequency, nyquist),
        "samples_analysed": analysed,
        "samples_discarded": num_samples - analysed,
    }


def generate(params: Mapping[str, Any], result: Mapping[str, Any],
             seed: int) -> Dict[str, pd.DataFrame]:
    time_domain = two_tone_signal(
        frequency1=params["frequency1"], frequency2=params["frequency2"],
        amplitude1=params["amplitude1"], amplitude2=params["amplitude2"],
        phase1=params["phase1"], phase2=params["phase2"],
        sample_rate=params["sample_rate"], duration=params["duration"],
        noise_level=params["noise_level"], rng=SeededRandom(seed),
    )

    weights = window_weights(params["window_function"], len(time_domain))
    windowed = pd.DataFrame({
        "time": time_domain["time"],
        "amplitude": time_domain["amplitude"] * weights,
        "window": weights,
    })

    spectrum = bounded_dft(windowed["amplitude"], params["sample_rate"],
                           result["max_frequency"])
    return {
        "time_domain": time_domain,
        "windowed_signal": windowed,
        "frequency_spectrum": spectrum.frame,
    }


def domain_check(params: Mapping[str, Any], result: Mapping[str, Any]) -> bool:
    return result["num_samples"] > 0 and result["max_frequency"] <= result["nyquist_frequency"]


PHASES = (
    PhaseDescriptor(
        id="introduction", title="Time Domain Signals",
        description="Understand how signals appear in the time domain and what information "
                    "they contain",
        estimated_time=8,
        content=InteractiveContent(
            parameters=("frequency1", "frequency2", "amplitude1", "amplitude2",
                        "phase1", "phase2", "noise_level"),
            series=("time_domain",))),
    PhaseDescriptor(
        id="frequency-domain", title="Frequency Domain Analysis",
        description="Learn how the FFT reveals the frequency content of signals",
        estimated_time=8,
        content=ChartContent(series=("time_domain", "frequency_spectrum"),
                             caption="Peaks appear at the two component frequencies")),
    PhaseDescriptor(
        id="windowing", title="Windowing Functions",
        description="Explore how windowing reduces spectral leakage and improves analysis",
        estimated_time=7,
        content=InteractiveContent(parameters=("window_function",),
                                   series=("windowed_signal", "frequency_spectrum"))),
    PhaseDescriptor(
        id="sampling", title="Sampling and Nyquist Theorem",
        description="Understand sampling requirements and the Nyquist criterion",
        estimated_time=7,
        content=InteractiveContent(parameters=("sample_rate", "duration"),
                                   series=("time_domain", "frequency_spectrum"))),
)

MODULE = LessonModule(
    id="fast-fourier-transform",
    title="Fast Fourier Transform: From Time to Frequency",
    short_title="Fast Fourier Transform",
    description="Explore the FFT algorithm and learn how to analyze signals in both time and "
                "frequency domains, understanding sampling, windowing, and spectral analysis.",
    difficulty="intermediate",
    duration="25-35 minutes",
    estimated_time=30,
    topics=("Signal Processing", "Fourier Transform", "Frequency Analysis",
            "Digital Signal Processing"),
    categories=("signal-processing", "mathematics", "engineering"),
    tags=("fft", "fourier-transform", "frequency-domain", "time-domain", "sampling",
          "windowing", "spectral-analysis"),
    prerequisites=(
        "Basic understanding of sine waves and trigonometry",
        "Familiarity with the concept of frequency",
        "Basic knowledge of sampling and digital signals",
        "Understanding of mathematical functions",
    ),
    learning_objectives=(
        "Understand the relationship between time and frequency domains",
        "Learn how the Fast Fourier Transform works conceptually",
        "Explore the effects of sampling rate on signal analysis",
        "Understand windowing and its role in reducing spectral leakage",
        "Learn about the Nyquist theorem and aliasing",
        "Apply FFT concepts to analyze composite signals",
    ),
    parameter_schema=PARAMETERS,
    calculate=calculate,
    generate=generate,
    phases=PHASES,
    domain_check=domain_check,
)
